"""
Imperative shell: ledger collaborator, configuration, pool service.
"""
