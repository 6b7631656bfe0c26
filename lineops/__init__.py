# path: lineops/__init__.py
"""
LineOps: учёт линий дочерних обществ, заявок о неисправностях и запросов на новые линии.
"""

__version__ = "0.1.0"
