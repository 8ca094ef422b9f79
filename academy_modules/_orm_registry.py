"""
Module ORM Registry (``academy_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table before ``create_tables()`` runs.

Architecture position
---------------------
**Modules layer** -- utility.  Imported lazily by
``academy_kernel.db.engine.create_tables``; never at kernel import time.
"""


def import_all_orm_models() -> None:
    """Import every ``academy_modules.*.orm`` module.  Idempotent."""
    import academy_modules.filing.orm  # noqa: F401
    import academy_modules.payroll.orm  # noqa: F401
