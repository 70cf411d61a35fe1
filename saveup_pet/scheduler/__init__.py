"""Background jobs for the pet engine"""
