"""Review Knowledge - Collect [must] review comments into a policy document."""

__version__ = "0.1.0"
