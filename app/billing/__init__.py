# app/billing/__init__.py
from .revenue_types import *
from .revenue_calculator import *
