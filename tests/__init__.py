"""
Тесты covered-call AMM

Contains:
- tests/unit/          : Unit tests для core и amm модулей
"""
