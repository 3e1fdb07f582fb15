#!/usr/bin/env python3
"""
Script de inicio del worker RQ que procesa las consultas CEP encoladas.
"""

from redis import Redis
from rq import Worker

from api.config import settings

redis_url = settings.redis_connection_url

if redis_url.startswith('rediss://'):
    print("🔒 Usando SSL para conexión a Redis", flush=True)
else:
    print("🔓 Usando conexión sin SSL a Redis local", flush=True)

redis_conn = Redis.from_url(
    redis_url,
    decode_responses=False,
    socket_keepalive=True,
    health_check_interval=30,
    socket_connect_timeout=10,
    retry_on_timeout=True
)

try:
    redis_conn.ping()
    print("✅ Connected to Redis successfully", flush=True)
    print(f"📋 Redis URL: {redis_url[:20]}...", flush=True)
except Exception as e:
    print(f"❌ Failed to connect to Redis: {e}", flush=True)
    raise

print(f"🚀 Starting RQ worker on queue '{settings.queue_name}'...", flush=True)
worker = Worker([settings.queue_name], connection=redis_conn)
print("👷 Worker started, waiting for consultas CEP...", flush=True)
worker.work(with_scheduler=True)
