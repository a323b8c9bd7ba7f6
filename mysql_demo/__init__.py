"""
Walkthrough of basic relational-database connectivity.

The package connects to a MySQL server, creates a demo table when it is
missing, inserts a small set of people (skipping names already stored),
prints the oldest person and finally drops the table again.  Modules are
split by concern: ``config`` for settings and SQL templates, ``infra.db``
for connections, ``services`` for the session stages and ``cli`` for the
command-line entry points.
"""
