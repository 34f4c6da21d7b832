"""
FastAPI backend for the Surebet Scanner.

Provides REST API endpoints for:
- Odds sync trigger and status
- Stored games and the arbitrage log
- Surebet evaluation and risk picks
- Scheduler control
"""
