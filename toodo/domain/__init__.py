"""Domain layer for toodo.

Pure models and operations with no I/O:

- todo: the Todo entity, its work-state machine, dependency graph and
  work-time calculations
- project, tag, activity: supporting aggregates
- shared: the error taxonomy
- repositories: persistence contracts implemented by the infrastructure layer
"""
