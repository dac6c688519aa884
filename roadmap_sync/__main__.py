from roadmap_sync.cli import main

raise SystemExit(main())
