from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask

from app.config import AppConfig
from app.services.application.auth_service import UserAuthManager
from app.services.application.configuration_service import ConfigurationService
from app.services.application.device_service import DeviceService
from app.services.application.food_service import FoodService
from app.services.application.gateway_service import GatewayService
from app.services.application.habit_service import HabitService
from app.services.application.sensor_service import SensorService
from app.services.application.user_service import UserService
from app.services.utilities.broker_gateway import BrokerGatewayClient
from app.services.utilities.email_service import EmailConfig, EmailService
from app.services.utilities.nutrition_client import NutritionClient
from infrastructure.database.repositories import (
    ConfigurationRepository,
    DeviceRepository,
    HabitRepository,
    SensorRepository,
    UserRepository,
)
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    database: SQLiteDatabaseHandler
    user_repo: UserRepository
    habit_repo: HabitRepository
    configuration_repo: ConfigurationRepository
    device_repo: DeviceRepository
    sensor_repo: SensorRepository
    audit_logger: AuditLogger
    email_service: EmailService
    broker_client: BrokerGatewayClient
    nutrition_client: NutritionClient
    auth_manager: UserAuthManager
    user_service: UserService
    habit_service: HabitService
    configuration_service: ConfigurationService
    device_service: DeviceService
    sensor_service: SensorService
    gateway_service: GatewayService
    food_service: FoodService

    @classmethod
    def build(cls, config: AppConfig, *, app: Flask | None = None) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration
            app: Flask app whose app-context teardown closes DB connections
        """
        logger.info("Building ServiceContainer...")
        database = SQLiteDatabaseHandler(config.database_path)
        database.init_app(app)

        user_repo = UserRepository(database)
        habit_repo = HabitRepository(database)
        configuration_repo = ConfigurationRepository(database)
        device_repo = DeviceRepository(database)
        sensor_repo = SensorRepository(database)

        audit_logger = AuditLogger(config.audit_log_path)
        email_service = EmailService(
            EmailConfig(
                smtp_host=config.smtp_host,
                smtp_port=config.smtp_port,
                smtp_username=config.smtp_username or None,
                smtp_password=config.smtp_password or None,
                smtp_use_tls=config.smtp_use_tls,
                from_name=config.smtp_from_name,
            )
        )
        if not email_service.enabled:
            logger.warning("SMTP host not configured; account e-mails will be skipped")

        broker_client = BrokerGatewayClient(
            config.broker_url,
            config.broker_api_key,
            config.broker_secret_key,
            verify=config.broker_verify_tls,
            timeout=config.broker_timeout,
        )
        nutrition_client = NutritionClient(
            config.nutrition_url,
            app_id=config.nutrition_app_id,
            app_key=config.nutrition_app_key,
            analysis_app_id=config.nutrition_analysis_app_id,
            analysis_app_key=config.nutrition_analysis_app_key,
            timeout=config.nutrition_timeout,
        )

        auth_manager = UserAuthManager(
            user_repo=user_repo,
            audit_logger=audit_logger,
            token_lifetime_days=config.token_lifetime_days,
            code_length=config.verification_code_length,
        )
        auth_manager.prune_expired_tokens()

        configuration_service = ConfigurationService(repository=configuration_repo, user_repo=user_repo)
        container = cls(
            config=config,
            database=database,
            user_repo=user_repo,
            habit_repo=habit_repo,
            configuration_repo=configuration_repo,
            device_repo=device_repo,
            sensor_repo=sensor_repo,
            audit_logger=audit_logger,
            email_service=email_service,
            broker_client=broker_client,
            nutrition_client=nutrition_client,
            auth_manager=auth_manager,
            user_service=UserService(
                user_repo=user_repo,
                device_repo=device_repo,
                sensor_repo=sensor_repo,
                configuration_repo=configuration_repo,
                auth=auth_manager,
                email_service=email_service,
                password_min_length=config.password_min_length,
            ),
            habit_service=HabitService(repository=habit_repo, user_repo=user_repo),
            configuration_service=configuration_service,
            device_service=DeviceService(
                repository=device_repo,
                sensor_repo=sensor_repo,
                user_repo=user_repo,
                audit_logger=audit_logger,
            ),
            sensor_service=SensorService(repository=sensor_repo, device_repo=device_repo),
            gateway_service=GatewayService(
                broker=broker_client,
                sensor_repo=sensor_repo,
                configuration_service=configuration_service,
            ),
            food_service=FoodService(client=nutrition_client, sensor_repo=sensor_repo),
        )
        logger.info("ServiceContainer built successfully.")
        return container

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        self.broker_client.close()
        self.nutrition_client.close()
        self.database.close_db()
        logger.info("ServiceContainer shutdown complete.")
