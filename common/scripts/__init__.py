# common/scripts/__init__.py
from .get_date_range import *
from .get_project_root import *
from .search_utils import *
