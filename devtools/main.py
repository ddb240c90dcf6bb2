#!/usr/bin/env python3
"""
DevTools 진단 메인 애플리케이션

Flask 웹 서버를 실행하고 진단 엔드포인트를 제공합니다.

실행 방법:
    python -m devtools.main --config app-config.yaml --config app-config.local.yaml

또는 Gunicorn으로 실행 (프로덕션):
    DEVTOOLS_CONFIG_PATH=/opt/devtools/config.yaml \
        gunicorn -w 4 -b 0.0.0.0:7007 'devtools.main:create_app()'
"""

import argparse
import logging
import sys
from typing import List, Optional

from flask import Flask, jsonify, request

from devtools.api import DevToolsApi
from devtools.checks.orchestrator import summarize
from devtools.config import Config, load_config
from devtools.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _route(config: Config, name: str) -> str:
    base = config.get('endpoints', 'base', default='').rstrip('/')
    return base + config.get('endpoints', name)


def create_app(config: Optional[Config] = None, api: Optional[DevToolsApi] = None) -> Flask:
    """
    Flask 애플리케이션을 생성합니다.

    Args:
        config: 설정 (None이면 DEVTOOLS_CONFIG_PATH에서 로드)
        api: 진단 API (테스트 시 주입)

    Returns:
        Flask: 애플리케이션
    """
    if config is None:
        config = load_config()
        setup_logging(config.get('logging', default={}))
    if api is None:
        api = DevToolsApi(config)

    app = Flask(__name__)
    app.config['DEVTOOLS_API'] = api
    log_requests = config.get('logging', 'log_requests', default=False)

    health_path = _route(config, 'health')
    info_path = _route(config, 'info')
    config_path = _route(config, 'config')
    dependencies_path = _route(config, 'external_dependencies')

    @app.before_request
    def log_request():
        """요청 로깅"""
        if log_requests:
            logger.debug(f"요청: {request.method} {request.path} (from: {request.remote_addr})")

    @app.route(health_path, methods=['GET'])
    def health():
        return jsonify({'status': 'ok'}), 200

    @app.route(info_path, methods=['GET'])
    def info():
        return jsonify(api.list_info().to_dict()), 200

    @app.route(config_path, methods=['GET'])
    def sanitized_config():
        return jsonify(api.list_config()), 200

    @app.route(dependencies_path, methods=['GET'])
    def external_dependencies():
        results = api.list_external_dependency_details()
        counts = summarize(results)
        if counts['unhealthy']:
            logger.warning(
                f"⚠️  외부 의존성 {counts['unhealthy']}/{counts['total']}개 Unhealthy"
            )
        return jsonify([result.to_dict() for result in results]), 200

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested endpoint does not exist',
            'available_endpoints': [health_path, info_path, config_path, dependencies_path]
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred'
        }), 500

    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='DevTools 진단 서버')
    parser.add_argument(
        '--config',
        action='append',
        default=None,
        help='설정 파일 경로 또는 URL (여러 번 지정 가능, 뒤쪽이 우선)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """메인 함수"""
    args = parse_args(argv)
    config = load_config(args.config)
    setup_logging(config.get('logging', default={}))

    host = config.get('server', 'host', default='0.0.0.0')
    port = config.get('server', 'port', default=7007)
    environment = config.get('application', 'environment', default='production')

    app = create_app(config)

    logger.info("=" * 80)
    logger.info(f"🚀 DevTools 진단 서버 시작")
    logger.info(f"  이름: {config.get('application', 'name')}")
    logger.info(f"  버전: {config.get('application', 'version')}")
    logger.info(f"  설정: {', '.join(config.sources) or '(기본값)'}")
    logger.info(f"  주소: http://{host}:{port}")
    logger.info("=" * 80)

    try:
        app.run(host=host, port=port, debug=environment == 'development')
    except KeyboardInterrupt:
        logger.info("서버 종료 중...")
    except Exception as e:
        logger.error(f"서버 시작 실패: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
