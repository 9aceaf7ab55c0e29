# server.py
import uvicorn
from main import app, config
from app.api.v1 import (
    patient_router,
    doctor_router,
    appointment_router,
    medical_record_router,
    settings_router,
    user_router,
    dashboard_router,
)

# Mount all routers here
app.include_router(patient_router)
app.include_router(doctor_router)
app.include_router(appointment_router)
app.include_router(medical_record_router)
app.include_router(settings_router)
app.include_router(user_router)
app.include_router(dashboard_router)

if __name__ == "__main__":
    uvicorn.run(
        "server:app",  # Routers are mounted on import of this module
        host="0.0.0.0",
        port=8080,
        reload=config.environment != "production",
        log_level=config.logging.level_value.lower(),
    )
