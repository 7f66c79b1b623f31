"""
FILE: corkboard/nav/__init__.py
PURPOSE: Interaction core - key chords, actions, focus, modes, popups and the App state machine
NOTES:
  - Import App from corkboard.nav.app; this package stays import-light so
    corkboard.config can depend on nav.actions/bindings/modes
"""
