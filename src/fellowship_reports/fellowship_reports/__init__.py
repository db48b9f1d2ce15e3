"""Fellowship Reports package.

Leadership-scoped attendance reporting for the fellowship membership tool,
organized by feature modules (members, scope, events, reports, publication)
with a thin Flask controller layer and service/repository layers.
"""
