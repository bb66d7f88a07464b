import sys
from pathlib import Path

# Ensure we can import the package when run from a checkout
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))


def main():
    from realscene.config import settings

    print("🚀 Starting MBTI Real Scene...")
    print(f"🌐 Server: http://localhost:{settings.PORT}")
    print(f"📖 API Docs: http://localhost:{settings.PORT}/docs")
    print("=" * 50)

    try:
        import uvicorn

        uvicorn.run(
            "realscene.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.RELOAD,
            log_level="debug" if settings.DEBUG else "info"
        )

    except ImportError as e:
        print(f"❌ Import error: {e}")
        print("Make sure you've installed the project: pip install -e .")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
