"""
The Whistle — anonymous incident reporting.

Form validation core: rule strings such as ``type=number required min=4``
are parsed into constraints and evaluated against submitted records.
"""

__version__ = "0.1.0"
