"""
Convenience entry point for running meetingcalendar as a module.

Usage: python -m meetingcalendar [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
