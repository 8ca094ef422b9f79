"""
Academy Modules.

Thin orchestration layers over the Academy Kernel and Engines.
Each module contains:
- Domain models (the nouns)
- Pure helpers and dispatchers (the formulas)
- Workflows (state machines)
- A persistence service and ORM companions

Modules:
- Payroll: Staff, shifts, allowances, deductions, pay slips
- Filing: Statutory filing calendar and obligation tracking
"""
