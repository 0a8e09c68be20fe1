"""
Core: fixed-point математика, нормальное распределение, инвариант
репликации, доменные модели и JSON Schema контракты.

Модуль не зависит от движка и внешних систем (реестров активов, callback).
"""
