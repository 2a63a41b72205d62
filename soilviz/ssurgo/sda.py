"""USDA NRCS Soil Data Access (SDA) client for SSURGO map units."""

from typing import Any

import requests

from soilviz.base import UpstreamProvider
from soilviz.config import ProviderConfig, get_provider_or_default
from soilviz.http_cache import request
from soilviz.logging_config import get_logger
from soilviz.ssurgo.models import Component, Horizon, Interpretation, MapUnit

logger = get_logger(__name__)

DEFAULT_PROVIDER = ProviderConfig(
    endpoint="https://SDMDataAccess.sc.egov.usda.gov/Tabular/post.rest",
    timeout_s=30.0,
    interpretation_timeout_s=15.0,
)

MAPUNIT_COLUMNS = ("mukey", "musym", "muname", "muacres", "areasymbol", "areaname")

COMPONENT_COLUMNS = (
    "cokey", "compname", "comppct_r", "majcompflag", "slope_r", "runoff",
    "nirrcapcl", "nirrcapscl", "irrcapcl", "irrcapscl",
    "drainagecl", "hydricrating", "taxtempcl", "frostact",
    "ecoclassid", "ecoclassname",
    "taxclname", "taxorder", "taxsuborder", "taxgrtgroup", "taxsubgrp",
    "pondfreqcl", "ponddurcl", "flodfreqcl", "floddurcl",
    "reskind", "resdept_r", "reshard", "wtdepannmin",
)  # fmt: skip

HORIZON_COLUMNS = (
    "chkey", "hzname", "hzdept_r", "hzdepb_r",
    "sandtotal_r", "silttotal_r", "claytotal_r", "om_r", "ph1to1h2o_r",
    "awc_r", "ksat_r", "dbthirdbar_r", "cec7_r", "pi_r", "lep_r", "ec_r",
)  # fmt: skip

# Interpretations are fetched separately; joining cointerp here multiplies
# rows by the number of rules per component.
MAP_UNIT_QUERY = """SELECT
    m.mukey, m.musym, m.muname, m.muacres,
    l.areasymbol, l.areaname,
    c.cokey, c.compname, c.comppct_r, c.majcompflag, c.slope_r, c.runoff,
    c.nirrcapcl, c.nirrcapscl, c.irrcapcl, c.irrcapscl,
    c.drainagecl, c.hydricrating, c.taxtempcl, c.frostact,
    cec.ecoclassid, cec.ecoclassname,
    c.taxclname, c.taxorder, c.taxsuborder, c.taxgrtgroup, c.taxsubgrp,
    cm.pondfreqcl, cm.ponddurcl, cm.flodfreqcl, cm.floddurcl,
    corestr.reskind, corestr.resdept_r, corestr.reshard,
    muagg.wtdepannmin,
    ch.chkey, ch.hzname, ch.hzdept_r, ch.hzdepb_r,
    ch.sandtotal_r, ch.silttotal_r, ch.claytotal_r, ch.om_r, ch.ph1to1h2o_r,
    ch.awc_r, ch.ksat_r, ch.dbthirdbar_r, ch.cec7_r, ch.pi_r, ch.lep_r, ch.ec_r
FROM mapunit m
INNER JOIN legend l ON m.lkey = l.lkey
INNER JOIN component c ON m.mukey = c.mukey
LEFT JOIN coecoclass cec ON c.cokey = cec.cokey
LEFT JOIN (
    SELECT
        cokey,
        MAX(pondfreqcl) AS pondfreqcl,
        MAX(ponddurcl) AS ponddurcl,
        MAX(flodfreqcl) AS flodfreqcl,
        MAX(floddurcl) AS floddurcl
    FROM comonth
    GROUP BY cokey
) AS cm ON c.cokey = cm.cokey
LEFT JOIN corestrictions corestr ON c.cokey = corestr.cokey
LEFT JOIN muaggatt muagg ON m.mukey = muagg.mukey
LEFT JOIN chorizon ch ON c.cokey = ch.cokey
WHERE m.mukey IN (
    SELECT DISTINCT mukey FROM mupolygon
    WHERE mupolygongeo.STIntersects(geometry::STGeomFromText('POINT({lon} {lat})', 4326)) = 1
)
ORDER BY c.comppct_r DESC, ch.hzdept_r ASC"""

INTERPRETATION_QUERY = """SELECT
    coi.cokey, coi.mrulename, coi.ruledepth, coi.interphrc, coi.interphr
FROM cointerp coi
WHERE coi.cokey IN ({cokeys})
ORDER BY coi.cokey, coi.seqnum"""


def rows_from_table(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Map a ``JSON+COLUMNNAME`` SDA table to dicts keyed by column name."""
    table = data.get("Table") or []
    if len(table) < 2:
        return []
    columns = [str(c).lower() for c in table[0]]
    return [dict(zip(columns, row, strict=False)) for row in table[1:]]


class SoilDataAccessClient(UpstreamProvider):
    """SSURGO tabular queries through Soil Data Access.

    API Documentation: https://sdmdataaccess.sc.egov.usda.gov/
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        provider = get_provider_or_default("ssurgo", "sda", DEFAULT_PROVIDER)
        self.base_url = base_url or provider.endpoint
        self.timeout = timeout or provider.timeout_s
        self.interpretation_timeout = (
            provider.interpretation_timeout_s or DEFAULT_PROVIDER.interpretation_timeout_s
        )

    @property
    def name(self) -> str:
        return "USDA NRCS Soil Data Access"

    @property
    def coverage_description(self) -> str:
        return "United States and territories - SSURGO detailed soil survey"

    def is_available(self) -> bool:
        try:
            response = request(
                "POST",
                self.base_url,
                data={"query": "SELECT TOP 1 mukey FROM mapunit", "format": "JSON"},
                timeout=5,
            )
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _post(self, query: str, timeout: float) -> list[dict[str, Any]]:
        response = request(
            "POST",
            self.base_url,
            data={"query": query, "format": "JSON+COLUMNNAME"},
            timeout=timeout,
        )
        if not response.ok:
            raise RuntimeError(f"SDA query failed: {response.status_code} {response.reason}")
        try:
            data = response.json()
        except ValueError as e:
            raise RuntimeError(f"SDA returned invalid JSON: {e}") from e
        return rows_from_table(data or {})

    def query_map_unit(self, lat: float, lon: float) -> MapUnit | None:
        """
        SSURGO map unit at a point, with components, horizons and interpretations.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            MapUnit, or None when the query fails or no map unit intersects
        """
        self.validate_coordinates(lat, lon)
        logger.info(f"Querying SSURGO map unit at ({lat}, {lon})")

        try:
            rows = self._post(MAP_UNIT_QUERY.format(lat=lat, lon=lon), self.timeout)
        except (requests.RequestException, RuntimeError) as e:
            logger.error(f"Error querying SSURGO: {e}")
            return None

        if not rows:
            logger.info(f"No SSURGO map unit found at ({lat}, {lon})")
            return None

        components: dict[str, Component] = {}
        seen_horizons: set[str] = set()

        for row in rows:
            cokey = row.get("cokey")
            if not cokey:
                continue
            cokey = str(cokey)
            if cokey not in components:
                components[cokey] = Component.model_validate(
                    {col: row.get(col) for col in COMPONENT_COLUMNS} | {"cokey": cokey}
                )

            chkey = row.get("chkey")
            if chkey and str(chkey) not in seen_horizons:
                seen_horizons.add(str(chkey))
                components[cokey].horizons.append(
                    Horizon.model_validate(
                        {col: row.get(col) for col in HORIZON_COLUMNS} | {"chkey": str(chkey)}
                    )
                )

        first = rows[0]
        map_unit = MapUnit.model_validate(
            {col: first.get(col) for col in MAPUNIT_COLUMNS}
            | {"mukey": str(first.get("mukey")), "components": list(components.values())}
        )

        if components:
            try:
                for cokey, interp in self._fetch_interpretations(list(components)):
                    components[cokey].interpretations.append(interp)
            except (requests.RequestException, RuntimeError) as e:
                logger.warning(f"Failed to fetch interpretations: {e}")

        logger.info(
            f"Retrieved map unit {map_unit.mukey} ({map_unit.muname}) with "
            f"{len(map_unit.components)} components"
        )
        return map_unit

    def _fetch_interpretations(self, cokeys: list[str]) -> list[tuple[str, Interpretation]]:
        keys = [k for k in cokeys if k.isdigit()]
        if not keys:
            return []
        query = INTERPRETATION_QUERY.format(cokeys=",".join(f"'{k}'" for k in keys))
        rows = self._post(query, self.interpretation_timeout)

        result = []
        for row in rows:
            interphrc = row.get("interphrc")
            try:
                value = float(interphrc) if interphrc not in (None, "") else 0.0
            except (TypeError, ValueError):
                value = 0.0
            result.append(
                (
                    str(row.get("cokey")),
                    Interpretation(
                        name=row.get("mrulename"),
                        depth=row.get("ruledepth"),
                        rating=row.get("interphr"),
                        value=value,
                    ),
                )
            )
        return result

    def query_interpretations(self, cokeys: list[str]) -> list[tuple[str, Interpretation]]:
        """
        Interpretation ratings for components, ordered by cokey and sequence.

        Returns:
            (cokey, Interpretation) pairs; empty on any failure
        """
        try:
            return self._fetch_interpretations(cokeys)
        except (requests.RequestException, RuntimeError) as e:
            logger.error(f"Error querying interpretations: {e}")
            return []
