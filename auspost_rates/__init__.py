"""
AusPost Rates

Multi-package shipping quotes from the Australia Post Postage Assessment
Calculator.
"""
__version__ = "1.0.0"
