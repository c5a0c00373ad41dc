#!/usr/bin/env python3
"""
Envío de Notificaciones Pendientes
Drains notification_history rows in status 'pending': Expo push to every
active device token and, when requested, an email through Resend

Usage:
    python scripts/notifications/send_notifications.py --limit 50
    python scripts/notifications/send_notifications.py --dry-run

Author: Mapu Team
Date: 2025-11-24
"""
import sys
import json
import asyncio
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment
env_path = Path(__file__).parent.parent.parent / '.env'
load_dotenv(env_path)

from marketplace.services.notification_service import NotificationDispatcher, clamp_batch_size

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main():
    """Main function"""
    import argparse

    parser = argparse.ArgumentParser(description='Enviar notificaciones pendientes (push + email)')
    parser.add_argument('--limit', type=int, help='Número máximo de notificaciones a procesar (tope: NOTIFICATION_BATCH_SIZE)')
    parser.add_argument('--dry-run', action='store_true', help='Solo listar pendientes (no envía ni actualiza)')

    args = parser.parse_args()

    try:
        batch_size = clamp_batch_size(args.limit)
    except ValueError as e:
        parser.error(str(e))

    if args.limit and args.limit > batch_size:
        logger.warning(f"--limit {args.limit} capped to {batch_size}")

    dispatcher = NotificationDispatcher(batch_size=batch_size)

    try:
        summary = await dispatcher.process_pending(dry_run=args.dry_run)
    except KeyboardInterrupt:
        logger.warning("Proceso interrumpido por el usuario")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error processing notifications: {e}")
        sys.exit(1)

    print(json.dumps(summary, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
