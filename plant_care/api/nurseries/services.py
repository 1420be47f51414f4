# plant_care/api/nurseries/services.py

import logging
from typing import Dict, Any, List
import requests

FALLBACK_OFFSET = 0.001  # 약 100m


class NurseryService:
    """Overpass API로 주변 화원(garden centre / nursery)을 검색하는 서비스 클래스입니다."""

    def __init__(self, api_url: str, radius: int = 1000, timeout: float = 10):
        self.api_url = api_url
        self.radius = radius
        self.timeout = timeout

    def _build_query(self, lat: float, lon: float) -> str:
        return (
            "[out:json];\n"
            "(\n"
            f'  node["shop"="garden_centre"](around:{self.radius},{lat},{lon});\n'
            f'  node["amenity"="nursery"](around:{self.radius},{lat},{lon});\n'
            ");\n"
            "out;\n"
        )

    @staticmethod
    def fallback_nurseries(lat: float, lon: float) -> List[Dict[str, Any]]:
        """검색 결과가 없거나 API 호출이 실패했을 때 사용할 근처 임시 좌표."""
        return [
            {"name": "Nursery Near You 1", "latitude": lat + FALLBACK_OFFSET,
             "longitude": lon + FALLBACK_OFFSET, "address": "Nearby street"},
            {"name": "Nursery Near You 2", "latitude": lat - FALLBACK_OFFSET,
             "longitude": lon - FALLBACK_OFFSET, "address": "Nearby street"},
        ]

    def find_nearby(self, lat: float, lon: float) -> List[Dict[str, Any]]:
        """
        좌표 주변 화원 목록을 반환합니다.

        :param lat: 위도
        :param lon: 경도
        :return: [{name, latitude, longitude, address}, ...]
        """
        try:
            response = requests.get(
                self.api_url,
                params={"data": self._build_query(lat, lon)},
                timeout=self.timeout
            )
            response.raise_for_status()
            elements = response.json().get('elements', [])
        except (requests.RequestException, ValueError) as e:
            logging.warning(f"Overpass API 호출 실패, 임시 좌표로 대체합니다: {e}")
            return self.fallback_nurseries(lat, lon)

        nurseries = []
        for el in elements:
            if el.get('lat') is None or el.get('lon') is None:
                continue
            tags = el.get('tags') or {}
            nurseries.append({
                "name": tags.get('name') or "Unnamed Nursery",
                "latitude": float(el['lat']),
                "longitude": float(el['lon']),
                "address": tags.get('addr:street') or "No address available",
            })

        if not nurseries:
            logging.info(f"주변 화원 검색 결과 없음 ({lat}, {lon}), 임시 좌표로 대체합니다.")
            return self.fallback_nurseries(lat, lon)
        return nurseries
