# locations_api/utils/http.py
import httpx
from typing import Optional

async def get_json(
    url: str,
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        r = await client.get(url, headers=headers, params=params)
        r.raise_for_status()
        return r.json()
