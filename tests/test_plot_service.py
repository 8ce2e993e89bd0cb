"""
Tests for the admin catalog service.
"""

import uuid

import pytest

from plot_catalog.repositories.plot import PlotRepository
from plot_catalog.schemas.plot import PlotUpdate
from plot_catalog.services.plot import PlotService, sanitize_plot, with_cover_image
from plot_catalog.utils.exceptions import (
    BadRequestError,
    FileSizeExceededError,
    NoValidRowsError,
    PlotNotFoundError,
    ValidationError,
)
from tests.conftest import PlotFactory


@pytest.fixture
def plot_service(db_session) -> PlotService:
    return PlotService(db_session)


class TestSanitizePlot:
    """Single record cleaning."""

    def test_trims_and_defaults(self):
        plot = sanitize_plot({
            "title": "  Lote Norte ",
            "location": " Ancud ",
            "price_usd": "1500",
            "area_m2": 300,
            "description": "   ",
            "image_url": "",
        })

        assert plot["title"] == "Lote Norte"
        assert plot["location"] == "Ancud"
        assert plot["price_usd"] == 1500.0
        assert plot["area_m2"] == 300.0
        assert plot["status"] == "available"
        assert plot["type"] == "residential"
        assert plot["description"] is None
        assert plot["image_url"] is None
        assert plot["image_urls"] == []
        assert plot["lat"] is None
        assert plot["lng"] is None

    def test_lower_cases_status_and_type(self):
        plot = sanitize_plot({
            "title": "Lote", "location": "Ancud", "price_usd": 1, "area_m2": 1,
            "status": "SOLD", "type": "Commercial",
        })
        assert plot["status"] == "sold"
        assert plot["type"] == "commercial"

    @pytest.mark.parametrize("field, value", [
        ("title", ""),
        ("location", None),
        ("price_usd", "abc"),
        ("price_usd", float("inf")),
        ("area_m2", None),
        ("area_m2", True),
    ])
    def test_invalid_records(self, field, value):
        data = {"title": "Lote", "location": "Ancud", "price_usd": 1, "area_m2": 1}
        data[field] = value
        assert sanitize_plot(data) is None

    def test_non_finite_coordinates_become_null(self):
        plot = sanitize_plot({
            "title": "Lote", "location": "Ancud", "price_usd": 1, "area_m2": 1,
            "lat": "nan", "lng": -73.5,
        })
        assert plot["lat"] is None
        assert plot["lng"] == -73.5

    def test_image_url_seeds_gallery(self):
        plot = sanitize_plot({
            "title": "Lote", "location": "Ancud", "price_usd": 1, "area_m2": 1,
            "image_url": "https://cdn.example.com/a.jpg",
        })
        assert plot["image_urls"] == ["https://cdn.example.com/a.jpg"]

    def test_not_a_dict(self):
        assert sanitize_plot(["Lote"]) is None


class TestCoverImage:
    """Cover image and gallery reconciliation."""

    def test_gallery_sets_cover(self):
        assert with_cover_image(None, ["a", "b"]) == ("a", ["a", "b"])

    def test_cover_moves_to_front(self):
        assert with_cover_image("b", ["a", "b"]) == ("b", ["b", "a"])

    def test_new_cover_prepended(self):
        assert with_cover_image("c", ["a", "b"]) == ("c", ["c", "a", "b"])

    def test_empty(self):
        assert with_cover_image(None, []) == (None, [])


class TestCreatePlots:
    """Batch creation."""

    @pytest.mark.asyncio
    async def test_partial_batch(self, plot_service: PlotService, plot_repository: PlotRepository):
        items = [
            {"title": f"Lote {i}", "location": "Castro", "price_usd": 100 * i, "area_m2": 10}
            for i in range(1, 4)
        ]
        items += [
            {"title": "", "location": "Castro", "price_usd": 1, "area_m2": 1},
            {"title": "Sin precio", "location": "Castro", "area_m2": 1},
        ]

        count = await plot_service.create_plots(items)

        assert count == 3
        stored = await plot_repository.list_recent()
        assert sorted(plot.title for plot in stored) == ["Lote 1", "Lote 2", "Lote 3"]

    @pytest.mark.asyncio
    async def test_empty_batch(self, plot_service: PlotService):
        with pytest.raises(BadRequestError, match="No plots provided."):
            await plot_service.create_plots([])

    @pytest.mark.asyncio
    async def test_all_invalid(self, plot_service: PlotService, plot_repository: PlotRepository):
        with pytest.raises(NoValidRowsError):
            await plot_service.create_plots([{"title": "Solo titulo"}])

        assert await plot_repository.list_recent() == []


class TestUpdatePlot:
    """Partial updates."""

    @pytest.mark.asyncio
    async def test_only_sent_fields_change(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository)

        updated = await plot_service.update_plot(plot.id, PlotUpdate(price_usd=52000, status="Reserved"))

        assert updated.price_usd == 52000.0
        assert updated.status == "reserved"
        assert updated.title == "Terreno en Frutillar"
        assert updated.description == "Vista al lago"

    @pytest.mark.asyncio
    async def test_clear_description(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository)

        updated = await plot_service.update_plot(plot.id, PlotUpdate(description=None, lat=None))

        assert updated.description is None
        assert updated.lat is None
        assert updated.lng == -73.05

    @pytest.mark.asyncio
    async def test_gallery_update_sets_cover(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository, image_url="old", image_urls=["old"])

        updated = await plot_service.update_plot(plot.id, PlotUpdate(image_urls=["x", "y"]))

        assert updated.image_url == "x"
        assert updated.image_urls == ["x", "y"]

    @pytest.mark.asyncio
    async def test_cover_update_keeps_gallery(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository, image_url="a", image_urls=["a", "b"])

        updated = await plot_service.update_plot(plot.id, PlotUpdate(image_url="b"))

        assert updated.image_url == "b"
        assert updated.image_urls == ["b", "a"]

    @pytest.mark.asyncio
    async def test_clearing_cover_with_gallery_is_rejected(
        self, plot_service: PlotService, plot_repository: PlotRepository
    ):
        plot = await PlotFactory.create_plot(plot_repository, image_url="a", image_urls=["a", "b"])

        with pytest.raises(ValidationError):
            await plot_service.update_plot(plot.id, PlotUpdate(image_url=None))

        stored = await plot_repository.get_by_id(plot.id)
        assert stored.image_url == "a"
        assert stored.image_urls == ["a", "b"]

    @pytest.mark.asyncio
    async def test_clearing_cover_and_gallery_together(
        self, plot_service: PlotService, plot_repository: PlotRepository
    ):
        plot = await PlotFactory.create_plot(plot_repository, image_url="a", image_urls=["a", "b"])

        updated = await plot_service.update_plot(plot.id, PlotUpdate(image_url=None, image_urls=[]))

        assert updated.image_url is None
        assert updated.image_urls == []

    @pytest.mark.asyncio
    async def test_clearing_cover_without_gallery(
        self, plot_service: PlotService, plot_repository: PlotRepository
    ):
        plot = await PlotFactory.create_plot(plot_repository)

        updated = await plot_service.update_plot(plot.id, PlotUpdate(image_url=None))

        assert updated.image_url is None
        assert updated.image_urls == []

    @pytest.mark.asyncio
    async def test_empty_update(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository)

        with pytest.raises(BadRequestError):
            await plot_service.update_plot(plot.id, PlotUpdate())

    @pytest.mark.asyncio
    async def test_unknown_plot(self, plot_service: PlotService):
        with pytest.raises(PlotNotFoundError):
            await plot_service.update_plot(uuid.uuid4(), PlotUpdate(title="Nuevo"))


class TestDeletePlot:
    """Deletion."""

    @pytest.mark.asyncio
    async def test_delete(self, plot_service: PlotService, plot_repository: PlotRepository):
        plot = await PlotFactory.create_plot(plot_repository)

        await plot_service.delete_plot(plot.id)

        assert await plot_repository.get_by_id(plot.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown(self, plot_service: PlotService):
        with pytest.raises(PlotNotFoundError):
            await plot_service.delete_plot(uuid.uuid4())


class TestImportSpreadsheet:
    """Spreadsheet import through the service."""

    @pytest.mark.asyncio
    async def test_import_csv(self, plot_service: PlotService, plot_repository: PlotRepository):
        content = (
            "Título,Ubicación,Precio,Área,Estado,Tipo\n"
            "Lote A,Castro,\"US$ 1,200.50\",300,Disponible,Residencial\n"
            "Lote B,Dalcahue,2000,400,Vendido,Comercial\n"
            "Lote C,,3000,500,,\n"
            "Lote D,Chonchi,consultar,600,,\n"
            "Lote E,Quellón,5000,700,Reservado,Agrícola\n"
        ).encode("utf-8")

        count, total_rows = await plot_service.import_spreadsheet("lotes.csv", content)

        assert count == 3
        assert total_rows == 5
        stored = {plot.title: plot for plot in await plot_repository.list_recent()}
        assert set(stored) == {"Lote A", "Lote B", "Lote E"}
        assert stored["Lote A"].price_usd == 1200.50
        assert stored["Lote B"].status == "sold"
        assert stored["Lote E"].type == "agrarian"

    @pytest.mark.asyncio
    async def test_import_no_valid_rows(self, plot_service: PlotService):
        with pytest.raises(NoValidRowsError):
            await plot_service.import_spreadsheet("lotes.csv", b"titulo,ciudad\nLote,\n")

    @pytest.mark.asyncio
    async def test_import_empty_file(self, plot_service: PlotService):
        with pytest.raises(NoValidRowsError):
            await plot_service.import_spreadsheet("lotes.csv", b"")

    @pytest.mark.asyncio
    async def test_import_too_large(self, db_session):
        service = PlotService(db_session, max_import_size=10)

        with pytest.raises(FileSizeExceededError):
            await service.import_spreadsheet("lotes.csv", b"title,location\n" * 5)
