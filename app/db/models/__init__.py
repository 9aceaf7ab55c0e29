# app/db/models/__init__.py
from .db_base_model import *
from .patient_table import *
from .doctor_table import *
from .appointment_table import *
from .medical_record_table import *
from .center_settings_table import *
from .user_profile_table import *
from .user_role_table import *
