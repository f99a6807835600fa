"""
Service Organization
====================
Services are organized by their lifecycle and instantiation pattern:

**application/**
  Singleton services managed by ServiceContainer. One instance per application.
  Examples: UserService, DeviceService, GatewayService, FoodService

**utilities/**
  Clients and helpers that wrap an outside system and hold no domain state.
  Examples: BrokerGatewayClient, NutritionClient, EmailService

Wiring lives in :mod:`app.services.container`.
"""
