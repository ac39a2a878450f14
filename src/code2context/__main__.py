from code2context.cli import main

raise SystemExit(main())
