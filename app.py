from schoolsite import create_app

# WSGI entry point (gunicorn app:app, waitress-serve app:app)
app = create_app()

import os
import socket
import sys


def port_is_free(port):
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    result = sock.connect_ex(('127.0.0.1', port))
    sock.close()
    return result != 0


def find_available_port(start_port=8000, max_port=8100):
    """First free port in [start_port, max_port)"""
    for port in range(start_port, max_port):
        if port_is_free(port):
            return port
    return None


def print_startup_info(port):
    print("Starting school website")
    print("=" * 50)
    print(f"Public site:  http://localhost:{port}/")
    print(f"Back office:  http://localhost:{port}/auth/login")
    print("=" * 50)
    print("Create the first administrator with:")
    print("  flask --app app create-admin")
    print("Press Ctrl+C to stop the server")


def main():
    port = int(os.getenv('PORT', 0)) or find_available_port()
    if not port:
        print("No available ports found in range 8000-8100")
        return False

    print_startup_info(port)
    app.run(host='0.0.0.0', port=port, debug=os.getenv('FLASK_DEBUG') == '1', use_reloader=False)
    return True


if __name__ == '__main__':
    try:
        sys.exit(0 if main() else 1)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)
