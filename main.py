from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

from database.db import Base, engine

# ✅ 모델 임포트 (테이블 생성 및 relationship 문자열 참조 해석용)
from models import users, courses, assignments as assignment_models, grades as grade_models  # noqa: F401
from models import enrollments, component_scores as component_score_models, submissions as submission_models  # noqa: F401

# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import (
    auth, users as users_router, courses as courses_router,
    assignments, grades, component_scores, submissions,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS 설정 (React 프론트엔드 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(auth.router,             prefix="/v1")
app.include_router(users_router.router,     prefix="/v1")
app.include_router(courses_router.router,   prefix="/v1")
app.include_router(assignments.router,      prefix="/v1")
app.include_router(grades.router,           prefix="/v1")
app.include_router(component_scores.router, prefix="/v1")
app.include_router(submissions.router,      prefix="/v1")


# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.on_event("startup")
def _create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info(f"DB 테이블 확인 완료 (env={settings.ENV})")


# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - 강의/성적 관리 API"}
