"""
Checklist subsystem.

Components:
- checklist_models.py: data structures (Checklist, ChecklistPhase) + record codec
- schedule.py: cron schedule resolver (next reset instants)
- checklist_store.py: JSON-file-backed storage, one record per checklist
- checklist_config.py: checklist definitions loaded from config.toml
- lifecycle.py: periodic engine that computes, resets and persists checklists
"""
