"""MoneyGlow API: personal finance and gamified money habits for young creators."""
