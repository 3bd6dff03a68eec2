# Services package init
"""
LAMPY Backend - Services Layer
==============================

What:  Business logic between the routes (HTTP) and the database.
How:   Stateless service objects; every method receives the request's
       AsyncSession (and the FileService when it touches uploads).

Service Inventory:
    - AuthService:          register, login
    - UserService:          profile, location, preferences, profile photo
    - VerificationService:  photo/age uploads, admin approve/reject
    - CounsellorService:    listing, detail, recommendation, admin create
    - SessionService:       booking, listing, detail, cancellation
    - FileService:          upload validation, storage and serving
"""
