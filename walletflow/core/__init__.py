"""
Wallet client core: the auth, wallet reconciliation and transfer
controllers, and the observable state they publish through.
"""
