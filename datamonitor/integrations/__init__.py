"""
Adapters that embed a DataMonitor in third-party pipeline frameworks.

Each adapter lives in its own module so the core never imports the
framework it targets.
"""
