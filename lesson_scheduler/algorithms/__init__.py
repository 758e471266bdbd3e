# Initialize algorithms package
from . import month_grid
from . import greedy

__all__ = ['month_grid', 'greedy']
