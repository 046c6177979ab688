"""
ltexbot: renders LaTeX formulas sent to a Telegram bot.
"""
