"""Built-in ``tix`` commands: ``create``, ``search``, ``config`` and ``context``."""
