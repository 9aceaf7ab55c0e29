# app/api/v1/__init__.py
from .patient_router import *
from .doctor_router import *
from .appointment_router import *
from .medical_record_router import *
from .settings_router import *
from .user_router import *
from .dashboard_router import *
