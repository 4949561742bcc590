"""Packaging services: signing, archiving, installers and the orchestrator."""
