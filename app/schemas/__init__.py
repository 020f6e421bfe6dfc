"""
Schemas module - pydantic models shared by the services and the API.

All models live in `app.schemas.schemas`:
- Domain models (Student, PlacementRecord, Department, User)
- Request bodies (StudentCreate, PlacementCreate, MentorCreate, ...)
- Responses (DashboardReport, ImportResponse, TokenResponse, ...)
"""
