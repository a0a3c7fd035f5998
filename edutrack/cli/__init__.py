# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for EduTrack.

Commands are organized into separate modules for maintainability:
- shared.py: Output helpers and client/service builders
- stats.py: Dashboard statistics and session commands
- courses.py: Course catalog command
- track.py: Event recording command
- config.py: Configuration command
"""
