"""
Cupcake Store — Cupcake Service Unit Tests
===========================================

What:  Orchestration of validation and persistence per operation.
How:   The repository is an AsyncMock (see conftest.mock_repository), so
       these tests only assert what the service asks the store to do.

Test Strategy:
    ✅ create: trimmed entity reaches the repository; invalid input never does
    ✅ get/list: repository results pass straight through
    ✅ update: partial merge, no write on rejected input
    ✅ delete: existence check first, CupcakeNotFoundError when absent
"""

import pytest

from cupcake_store.exceptions import (
    CupcakeNotFoundError,
    DatabaseError,
    InvalidPriceError,
    NameRequiredError,
    NameTooShortError,
    RecordNotFoundError,
)
from cupcake_store.schemas.cupcake import CupcakeCreate, CupcakeUpdate
from cupcake_store.services.cupcake_service import CupcakeService


def _echo(cupcake):
    return cupcake


class TestCreateCupcake:

    @pytest.mark.asyncio
    async def test_persists_trimmed_available_cupcake(self, mock_repository):
        mock_repository.create.side_effect = _echo
        service = CupcakeService(mock_repository)

        created = await service.create_cupcake(
            CupcakeCreate(name=" Chocolate Especial ", flavor="Chocolate Belga", price_cents=1500)
        )

        mock_repository.create.assert_awaited_once()
        stored = mock_repository.create.await_args.args[0]
        assert stored is created
        assert stored.name == "Chocolate Especial"
        assert stored.flavor == "Chocolate Belga"
        assert stored.price_cents == 1500
        assert stored.is_available is True
        mock_repository.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_repository(self, mock_repository):
        service = CupcakeService(mock_repository)

        with pytest.raises(NameRequiredError):
            await service.create_cupcake(CupcakeCreate(name="", flavor="X", price_cents=1))

        mock_repository.create.assert_not_awaited()
        mock_repository.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repository_failure_propagates(self, mock_repository):
        mock_repository.create.side_effect = DatabaseError()
        service = CupcakeService(mock_repository)

        with pytest.raises(DatabaseError):
            await service.create_cupcake(
                CupcakeCreate(name="Lemon Drop", flavor="Lemon", price_cents=900)
            )


class TestReadCupcakes:

    @pytest.mark.asyncio
    async def test_get_returns_repository_entity(self, mock_repository, make_cupcake):
        cupcake = make_cupcake(id=7)
        mock_repository.find_by_id.return_value = cupcake
        service = CupcakeService(mock_repository)

        assert await service.get_cupcake(7) is cupcake
        mock_repository.find_by_id.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_get_missing_raises_record_not_found(self, mock_repository):
        mock_repository.find_by_id.side_effect = RecordNotFoundError(resource_id=99)
        service = CupcakeService(mock_repository)

        with pytest.raises(RecordNotFoundError, match="record not found"):
            await service.get_cupcake(99)

    @pytest.mark.asyncio
    async def test_list_returns_all_in_repository_order(self, mock_repository, make_cupcake):
        cupcakes = [make_cupcake(id=1), make_cupcake(id=2, name="Second")]
        mock_repository.find_all.return_value = cupcakes
        service = CupcakeService(mock_repository)

        assert await service.list_cupcakes() == cupcakes

    @pytest.mark.asyncio
    async def test_list_empty_store(self, mock_repository):
        mock_repository.find_all.return_value = []
        assert await CupcakeService(mock_repository).list_cupcakes() == []


class TestUpdateCupcake:

    @pytest.mark.asyncio
    async def test_partial_update_writes_merged_entity(self, mock_repository, make_cupcake):
        cupcake = make_cupcake(id=3)
        mock_repository.find_by_id.return_value = cupcake
        mock_repository.update.side_effect = _echo
        service = CupcakeService(mock_repository)

        updated = await service.update_cupcake(3, CupcakeUpdate(name="Updated Name Only"))

        mock_repository.update.assert_awaited_once_with(cupcake)
        mock_repository.commit.assert_awaited_once()
        assert updated.name == "Updated Name Only"
        assert updated.flavor == "Original Flavor"
        assert updated.price_cents == 1000
        assert updated.is_available is True

    @pytest.mark.asyncio
    async def test_rejected_update_writes_nothing(self, mock_repository, make_cupcake):
        cupcake = make_cupcake()
        mock_repository.find_by_id.return_value = cupcake
        service = CupcakeService(mock_repository)

        with pytest.raises(NameTooShortError):
            await service.update_cupcake(1, CupcakeUpdate(name="A"))

        mock_repository.update.assert_not_awaited()
        mock_repository.commit.assert_not_awaited()
        assert cupcake.name == "Original Name"

    @pytest.mark.asyncio
    async def test_invalid_price_writes_nothing(self, mock_repository, make_cupcake):
        mock_repository.find_by_id.return_value = make_cupcake()
        service = CupcakeService(mock_repository)

        with pytest.raises(InvalidPriceError):
            await service.update_cupcake(1, CupcakeUpdate(price_cents=0))

        mock_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_cupcake_is_record_not_found(self, mock_repository):
        mock_repository.find_by_id.side_effect = RecordNotFoundError(resource_id=9999)
        service = CupcakeService(mock_repository)

        with pytest.raises(RecordNotFoundError):
            await service.update_cupcake(9999, CupcakeUpdate(name="Whatever"))

        mock_repository.update.assert_not_awaited()


class TestDeleteCupcake:

    @pytest.mark.asyncio
    async def test_existing_cupcake_is_deleted(self, mock_repository):
        mock_repository.exists.return_value = True
        service = CupcakeService(mock_repository)

        await service.delete_cupcake(5)

        mock_repository.exists.assert_awaited_once_with(5)
        mock_repository.delete.assert_awaited_once_with(5)
        mock_repository.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_cupcake_raises_cupcake_not_found(self, mock_repository):
        mock_repository.exists.return_value = False
        service = CupcakeService(mock_repository)

        with pytest.raises(CupcakeNotFoundError, match="cupcake not found"):
            await service.delete_cupcake(5)

        mock_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existence_check_failure_propagates(self, mock_repository):
        mock_repository.exists.side_effect = DatabaseError()
        service = CupcakeService(mock_repository)

        with pytest.raises(DatabaseError):
            await service.delete_cupcake(5)

        mock_repository.delete.assert_not_awaited()


class TestCommit:
    """A write is only reported back once its commit succeeded."""

    @pytest.mark.asyncio
    async def test_create_commit_failure_propagates(self, mock_repository):
        mock_repository.create.side_effect = _echo
        mock_repository.commit.side_effect = DatabaseError()
        service = CupcakeService(mock_repository)

        with pytest.raises(DatabaseError):
            await service.create_cupcake(
                CupcakeCreate(name="Lemon Drop", flavor="Lemon", price_cents=900)
            )

    @pytest.mark.asyncio
    async def test_update_commit_failure_propagates(self, mock_repository, make_cupcake):
        mock_repository.find_by_id.return_value = make_cupcake()
        mock_repository.update.side_effect = _echo
        mock_repository.commit.side_effect = DatabaseError()
        service = CupcakeService(mock_repository)

        with pytest.raises(DatabaseError):
            await service.update_cupcake(1, CupcakeUpdate(price_cents=1200))

    @pytest.mark.asyncio
    async def test_delete_commit_failure_propagates(self, mock_repository):
        mock_repository.exists.return_value = True
        mock_repository.commit.side_effect = DatabaseError()
        service = CupcakeService(mock_repository)

        with pytest.raises(DatabaseError):
            await service.delete_cupcake(5)

    @pytest.mark.asyncio
    async def test_reads_do_not_commit(self, mock_repository, make_cupcake):
        mock_repository.find_by_id.return_value = make_cupcake()
        mock_repository.find_all.return_value = []
        service = CupcakeService(mock_repository)

        await service.get_cupcake(1)
        await service.list_cupcakes()

        mock_repository.commit.assert_not_awaited()
