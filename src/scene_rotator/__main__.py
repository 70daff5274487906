from scene_rotator.cli import main

raise SystemExit(main())
