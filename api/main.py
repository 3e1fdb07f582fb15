"""
FastAPI application principal.

Expone endpoints REST para:
- Health check
- Consulta síncrona de un pago (CEP)
- Consulta encolada en RQ y estado del job
- Catálogo de bancos y búsqueda de código por nombre
"""

import logging
import time
import uuid
from functools import lru_cache

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue
from rq.exceptions import NoSuchJobError
from rq.job import Job
from starlette.concurrency import run_in_threadpool

from api import __version__
from api.config import settings
from api.models import (
    BankLookupResponse, BanksResponse, ErrorResponse, HealthResponse, JobResponse, JobStatusEnum,
    JobStatusResponse, QueryRequest, QueryResponse,
)
from api.tasks import run_cep_query
from cep_query.exceptions import CEPQueryError, FormDataError
from cep_query.service import CEPQueryService
from cep_query.validation import validate_form_data

logger = logging.getLogger(__name__)

# Inicializar FastAPI
app = FastAPI(
    title="CEP Query API",
    description="API REST para consultar Comprobantes Electrónicos de Pago (SPEI) en Banxico",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)


# Dependency: Verificar API Key
async def verify_api_key(x_api_key: str = Header(..., description="API Key para autenticación")):
    """
    Dependency que verifica el API key en el header X-API-Key.

    Raises:
        HTTPException: Si el API key es inválido
    """
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )
    return x_api_key


@lru_cache
def get_cep_service() -> CEPQueryService:
    """Dependency: instancia única del servicio de consulta."""
    return CEPQueryService()


def get_redis() -> Redis:
    """Dependency: conexión a Redis para la cola RQ."""
    return Redis.from_url(
        settings.redis_connection_url,
        decode_responses=False,
        socket_keepalive=True,
        health_check_interval=30
    )


# Healthcheck endpoint (sin autenticación)
@app.get(
    "/healthz",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
    description="Verifica que la API está funcionando y tiene conexión a Redis"
)
async def health_check(redis_conn: Redis = Depends(get_redis)):
    redis_connected = False
    try:
        redis_conn.ping()
        redis_connected = True
    except RedisError:
        pass

    return HealthResponse(
        status="healthy" if redis_connected else "degraded",
        version=__version__,
        redis_connected=redis_connected
    )


@app.get("/", include_in_schema=False)
async def root():
    return JSONResponse({
        "message": "CEP Query API",
        "version": __version__,
        "docs": "/docs"
    })


# ====================================================================
# ENDPOINTS PRINCIPALES
# ====================================================================

@app.post(
    "/api/v1/cep/query",
    response_model=QueryResponse,
    tags=["CEP"],
    summary="Consulta un pago",
    description="Ejecuta la consulta en Banxico y espera el resultado (puede tardar más de 30 segundos).",
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def query_payment(
    request: QueryRequest,
    api_key: str = Depends(verify_api_key),
    service: CEPQueryService = Depends(get_cep_service)
):
    try:
        data = await run_in_threadpool(service.query_payment, request.to_form_data(), request.options)
    except FormDataError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except CEPQueryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return QueryResponse(data=data)


@app.post(
    "/api/v1/cep/jobs",
    response_model=JobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["CEP"],
    summary="Encola una consulta",
    description="Encola la consulta en Redis; un worker RQ la procesa en background."
)
async def enqueue_query(
    request: QueryRequest,
    api_key: str = Depends(verify_api_key),
    redis_conn: Redis = Depends(get_redis)
):
    # Un job inválido nunca llega al worker
    try:
        form_data = validate_form_data(request.to_form_data())
    except FormDataError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    job_id = f"cep_{int(time.time())}_{uuid.uuid4().hex[:8]}"

    try:
        queue = Queue(settings.queue_name, connection=redis_conn)
        # job_id es reservado por RQ: los argumentos de la función van en kwargs
        queue.enqueue(
            run_cep_query,
            kwargs={"job_id": job_id, "form_data": form_data, "options": request.options},
            job_id=job_id,
            job_timeout=f"{settings.job_timeout_minutes}m",
            result_ttl=settings.result_ttl_seconds,
            failure_ttl=settings.result_ttl_seconds
        )
    except Exception as e:
        logger.exception("No se pudo encolar el job %s", job_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al encolar job: {str(e)}"
        )

    return JobResponse(job_id=job_id, message="Consulta encolada.")


@app.get(
    "/api/v1/cep/jobs/{job_id}",
    response_model=JobStatusResponse,
    tags=["CEP"],
    summary="Estado de una consulta encolada",
    responses={404: {"model": ErrorResponse}}
)
async def get_job_status(
    job_id: str,
    api_key: str = Depends(verify_api_key),
    redis_conn: Redis = Depends(get_redis)
):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Job no encontrado: {job_id}")

    job_status = job.get_status()
    if job_status == "finished":
        return JobStatusResponse(job_id=job_id, status=JobStatusEnum.FINISHED, result=job.return_value())

    if job_status == "failed":
        latest = job.latest_result()
        error = latest.exc_string if latest else None
        return JobStatusResponse(job_id=job_id, status=JobStatusEnum.FAILED, error=error)

    if job_status == "started":
        return JobStatusResponse(job_id=job_id, status=JobStatusEnum.STARTED)

    return JobStatusResponse(job_id=job_id, status=JobStatusEnum.QUEUED)


@app.get(
    "/api/v1/cep/banks",
    response_model=BanksResponse,
    tags=["Bancos"],
    summary="Catálogo de bancos",
    responses={502: {"model": ErrorResponse}}
)
async def list_banks(
    api_key: str = Depends(verify_api_key),
    service: CEPQueryService = Depends(get_cep_service)
):
    try:
        banks = await run_in_threadpool(service.get_bank_options)
    except CEPQueryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return BanksResponse(banks=banks)


@app.get(
    "/api/v1/cep/banks/lookup",
    response_model=BankLookupResponse,
    tags=["Bancos"],
    summary="Código de banco por nombre",
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def lookup_bank(
    name: str = Query(..., min_length=1, description="Nombre (o parte) del banco"),
    api_key: str = Depends(verify_api_key),
    service: CEPQueryService = Depends(get_cep_service)
):
    try:
        code = await run_in_threadpool(service.get_bank_code_by_name, name)
    except CEPQueryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if code is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Banco no encontrado: {name}")

    return BankLookupResponse(name=name, code=code)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=False)
