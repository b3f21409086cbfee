"""AP config agent - reconciles an access point against pushed configurations."""

__version__ = "0.1.0"
