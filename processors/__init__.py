# processors/__init__.py
