# path: lineops/core/dependencies.py
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from lineops.crud.fault_repository import FaultRepository, IFaultRepository
from lineops.crud.line_repository import ILineRepository, LineRepository
from lineops.crud.line_request_repository import ILineRequestRepository, LineRequestRepository
from lineops.crud.line_type_repository import ILineTypeRepository, LineTypeRepository
from lineops.crud.subsidiary_repository import ISubsidiaryRepository, SubsidiaryRepository
from lineops.crud.user_repository import IUserRepository, UserRepository
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService
from lineops.lines.services.report_service import ReportService
from lineops.lines.services.request_workflow_service import LineRequestService


# --- репозитории (без состояния, один экземпляр на процесс) ---

@lru_cache(maxsize=1)
def _subsidiary_repo_singleton() -> SubsidiaryRepository:
    return SubsidiaryRepository()


def get_subsidiary_repository() -> ISubsidiaryRepository:
    return _subsidiary_repo_singleton()


@lru_cache(maxsize=1)
def _user_repo_singleton() -> UserRepository:
    return UserRepository()


def get_user_repository() -> IUserRepository:
    return _user_repo_singleton()


@lru_cache(maxsize=1)
def _line_type_repo_singleton() -> LineTypeRepository:
    return LineTypeRepository()


def get_line_type_repository() -> ILineTypeRepository:
    return _line_type_repo_singleton()


@lru_cache(maxsize=1)
def _line_repo_singleton() -> LineRepository:
    return LineRepository()


def get_line_repository() -> ILineRepository:
    return _line_repo_singleton()


@lru_cache(maxsize=1)
def _fault_repo_singleton() -> FaultRepository:
    return FaultRepository()


def get_fault_repository() -> IFaultRepository:
    return _fault_repo_singleton()


@lru_cache(maxsize=1)
def _line_request_repo_singleton() -> LineRequestRepository:
    return LineRequestRepository()


def get_line_request_repository() -> ILineRequestRepository:
    return _line_request_repo_singleton()


# --- сервисы ---

def get_lifecycle_service(
    fault_repo: IFaultRepository = Depends(get_fault_repository),
    line_repo: ILineRepository = Depends(get_line_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    subsidiary_repo: ISubsidiaryRepository = Depends(get_subsidiary_repository),
) -> FaultLifecycleService:
    return FaultLifecycleService(
        fault_repo=fault_repo,
        line_repo=line_repo,
        user_repo=user_repo,
        subsidiary_repo=subsidiary_repo,
    )


def get_line_service(
    line_repo: ILineRepository = Depends(get_line_repository),
    fault_repo: IFaultRepository = Depends(get_fault_repository),
    line_type_repo: ILineTypeRepository = Depends(get_line_type_repository),
    subsidiary_repo: ISubsidiaryRepository = Depends(get_subsidiary_repository),
) -> LineService:
    return LineService(
        line_repo=line_repo,
        fault_repo=fault_repo,
        line_type_repo=line_type_repo,
        subsidiary_repo=subsidiary_repo,
    )


def get_line_request_service(
    request_repo: ILineRequestRepository = Depends(get_line_request_repository),
    line_repo: ILineRepository = Depends(get_line_repository),
    line_type_repo: ILineTypeRepository = Depends(get_line_type_repository),
    subsidiary_repo: ISubsidiaryRepository = Depends(get_subsidiary_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> LineRequestService:
    return LineRequestService(
        request_repo=request_repo,
        line_repo=line_repo,
        line_type_repo=line_type_repo,
        subsidiary_repo=subsidiary_repo,
        user_repo=user_repo,
    )


def get_report_service(
    fault_repo: IFaultRepository = Depends(get_fault_repository),
    line_repo: ILineRepository = Depends(get_line_repository),
    request_repo: ILineRequestRepository = Depends(get_line_request_repository),
) -> ReportService:
    return ReportService(fault_repo=fault_repo, line_repo=line_repo, request_repo=request_repo)
