from prism.main import main

main()
