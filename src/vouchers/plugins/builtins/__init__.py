"""Built-in plugins shipped with vouchers."""
