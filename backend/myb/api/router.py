from fastapi import APIRouter
from myb.api import auth, books, chapters, comments, progress, purchases, reports, uploads, users

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(books.router, tags=["books"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(chapters.router, tags=["chapters"])
api_router.include_router(purchases.router, tags=["purchases"])
api_router.include_router(progress.router, tags=["reading_progress"])
api_router.include_router(reports.router, tags=["reports"])
api_router.include_router(comments.router, tags=["comments"])
api_router.include_router(uploads.router, tags=["uploads"])
