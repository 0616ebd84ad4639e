"""
Ingredient safety analysis: tokenize, classify, look up hazard data, aggregate.
"""
