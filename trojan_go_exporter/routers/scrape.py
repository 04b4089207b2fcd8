from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from trojan_go_exporter.core.collector import TrojanGoCollector


def get_collector(request: Request) -> TrojanGoCollector:
    return request.app.state.collector


async def scrape(collector: TrojanGoCollector = Depends(get_collector)) -> Response:
    # collect() blocks on gRPC, keep it off the event loop
    payload = await run_in_threadpool(generate_latest, collector.registry)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def build_router(metrics_path: str) -> APIRouter:
    router = APIRouter(tags=["scrape"])
    router.add_api_route(
        metrics_path,
        scrape,
        methods=["GET"],
        response_class=Response,
        include_in_schema=False,
    )
    return router
