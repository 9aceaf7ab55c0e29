# app/db/schemas/__init__.py
from .patient_schema import *
from .doctor_schema import *
from .appointment_schemas import *
from .medical_record_schemas import *
from .settings_schemas import *
from .user_schemas import *
from .dashboard_schemas import *
