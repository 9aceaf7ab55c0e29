# app/services/v1/__init__.py
from .medical_record_service import *
from .patient_service import *
from .doctor_service import *
from .appointment_service import *
from .settings_service import *
from .permission_service import *
from .user_service import *
from .dashboard_service import *
