# Initialize data package
from . import roster
from . import converter

__all__ = ['roster', 'converter']
