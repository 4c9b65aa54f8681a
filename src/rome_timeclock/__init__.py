"""ROME warehouse time clock.

Feature modules (workers, punches, production, timeoff, passkeys, ...) each
carry a model, a repository protocol with MySQL and in-memory
implementations, a service and a thin Flask controller.
"""
