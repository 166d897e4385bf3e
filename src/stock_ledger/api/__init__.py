"""HTTP surface for the stock ledger."""
