"""eventql — GraphQL backend for an event-management app.

Users register, log in, create and edit events, and mark attendance.
Every query and mutation runs behind a bearer-token gate and inside its
own database transaction.
"""

__version__ = "0.1.0"
