# -------- Aliases (clarify intent) --------
Symbol = str
Quantity = int
